"""
WellnessAI - Patient Intake & Cardiac Risk Assessment Service
"""
__version__ = "0.1.0"
