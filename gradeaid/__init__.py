"""
GradeAid - scoring for AI-assisted paper grading.

This package turns an AI analysis of a student paper into a normalized
0-100 score, using accuracy-only grading for mathematics and a weighted
blend of skills and accuracy for every other subject.
"""

__version__ = "1.0.0"
__author__ = "GradeAid Team"
