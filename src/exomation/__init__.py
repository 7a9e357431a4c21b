"""
Exercise classification and repetition counting from body-pose landmarks.
"""

__version__ = "0.1.0"
