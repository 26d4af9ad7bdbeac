"""
Core Module

Intake value objects, the risk engine, report synthesis and collaborators.
"""
