"""
StudyHub application package.
"""
