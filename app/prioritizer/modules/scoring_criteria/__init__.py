"""
Scoring criteria module: list, create and reweight the named dimensions
shown next to the matrix. Weights are informational and do not feed the
total score.
"""
