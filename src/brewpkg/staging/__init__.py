"""Staging engine: selects packages and populates the staging root."""

from brewpkg.staging.auxiliary import AuxiliaryStager
from brewpkg.staging.plan import StagingPlan
from brewpkg.staging.selector import select_packages
from brewpkg.staging.tree import TreeStager, is_whitelisted

__all__ = ["AuxiliaryStager", "StagingPlan", "TreeStager", "is_whitelisted", "select_packages"]
