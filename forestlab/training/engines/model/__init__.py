#!filepath: forestlab/training/engines/model/__init__.py
"""
Concrete ModelTrainEngine implementations, one per H2O estimator.
"""
