"""
Clinical Lookup Tables

Declarative catalogs used by the risk engine and report synthesis:
symptom and risk-factor vocabularies, their point values, the
symptom -> candidate-condition map, and the diagnostic test lists.
"""
from typing import Dict, Tuple

# Reported symptoms accepted by the intake form, in display order
SYMPTOM_CATALOG: Tuple[str, ...] = (
    "Chest Pain",
    "Shortness of Breath",
    "Palpitations",
    "Syncope (Fainting)",
    "Irregular Heartbeat",
    "Swelling in Legs/Ankles",
    "Dizziness",
    "Fatigue",
    "Nausea",
    "Cold Sweats",
    "Jaw or Arm Pain",
)

RISK_FACTOR_CATALOG: Tuple[str, ...] = (
    "Diabetes",
    "Hypertension",
    "Family History of Heart Disease",
    "Smoking",
    "High Cholesterol",
    "Obesity",
    "Sedentary Lifestyle",
    "Excessive Alcohol Use",
    "Stress",
)

# Points per matching symptom / factor
HIGH_RISK_SYMPTOM_POINTS: Dict[str, int] = {
    "Chest Pain": 2,
    "Shortness of Breath": 2,
    "Palpitations": 2,
    "Syncope (Fainting)": 2,
}

CRITICAL_RISK_FACTOR_POINTS: Dict[str, int] = {
    "Diabetes": 1,
    "Hypertension": 1,
    "Family History of Heart Disease": 1,
    "Smoking": 1,
}

# (threshold, points) pairs, checked highest first; value must be strictly greater
AGE_POINTS: Tuple[Tuple[int, int], ...] = ((65, 2), (50, 1))
BMI_POINTS: Tuple[Tuple[float, int], ...] = ((30.0, 2), (25.0, 1))

# Vital thresholds
SYSTOLIC_BP_LIMIT = 140
DIASTOLIC_BP_LIMIT = 90
BLOOD_PRESSURE_POINTS = 2
TACHYCARDIA_LIMIT = 100
BRADYCARDIA_LIMIT = 60
HEART_RATE_POINTS = 1
SPO2_LOW_LIMIT = 95
SPO2_POINTS = 3
FEVER_LIMIT_F = 100.4

MAX_RISK_SCORE = 10

SYMPTOM_CONDITIONS: Dict[str, Tuple[str, ...]] = {
    "Chest Pain": (
        "Coronary Artery Disease",
        "Aortic Stenosis",
        "Hypertrophic Cardiomyopathy",
    ),
    "Shortness of Breath": (
        "Mitral Valve Disease",
        "Heart Failure",
        "Pulmonary Hypertension",
    ),
    "Palpitations": (
        "Atrial Fibrillation",
        "Supraventricular Tachycardia",
        "Ventricular Arrhythmia",
    ),
    "Syncope (Fainting)": (
        "Aortic Stenosis",
        "Heart Block",
        "Ventricular Arrhythmia",
    ),
    "Irregular Heartbeat": (
        "Atrial Fibrillation",
        "Heart Block",
    ),
    "Swelling in Legs/Ankles": (
        "Heart Failure",
        "Chronic Venous Insufficiency",
    ),
}

BASE_DIAGNOSTICS: Tuple[str, ...] = (
    "12-Lead Electrocardiogram (ECG)",
    "Transthoracic Echocardiogram",
    "Lipid Panel",
    "Complete Blood Count (CBC)",
    "Comprehensive Metabolic Panel",
    "HbA1c (Glycated Hemoglobin)",
    "Chest X-Ray",
)
URGENT_DIAGNOSTIC = "Cardiac Troponin Test"
ELEVATED_SCORE_DIAGNOSTIC = "Exercise Stress Test"
ELEVATED_SCORE_THRESHOLD = 5

DISCLAIMER = (
    "This report is generated by an automated, rule-based screening tool for "
    "informational purposes only. It is not a medical diagnosis and does not "
    "replace evaluation by a qualified healthcare professional. If you are "
    "experiencing severe chest pain, difficulty breathing, or fainting, call "
    "your local emergency number immediately."
)
