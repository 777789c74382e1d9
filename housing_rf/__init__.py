"""
Housing Sale Price Regression

Batch workflow for the housing-sale dataset with:
- Fixed numeric feature schema (36 columns)
- log1p target transform
- Per-table mean imputation
- Random forest with 10-fold CV grid search over max_features
- Submission-ready Id,SalePrice output
"""

__version__ = "1.0.0"
