"""
Pose detection boundary: landmark data contract and detector implementations.
"""
