"""
Reports module (read-only).

- Prioritization matrix (four impact/effort quadrants)
- Summary metrics for the reports page
- CSV export of all features
"""
