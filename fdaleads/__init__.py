"""
FDA Lead Generation Backend - regulatory intelligence over openFDA and ClinicalTrials.gov
"""

__version__ = "5.1.0"
