"""Prompt template and static advisory text."""

from medagent.models.triage import RiskCategory


ADVISORY_PROMPT = (
    "A user{patient_name}, aged {age}, reports the following symptoms: {symptoms}. "
    "Provide medically neutral but empathetic guidance suitable for a non-medical "
    "audience in under {max_words} words. Do not diagnose. Always remind them to "
    "consult a healthcare professional for serious concerns."
)

FALLBACK_ADVICE = {
    RiskCategory.LOW: (
        "Based on your symptoms, focus on rest, hydration, and monitoring your "
        "condition. Over-the-counter medications may help with comfort. Contact a "
        "healthcare provider if symptoms persist or worsen."
    ),
    RiskCategory.MODERATE: (
        "Your symptoms suggest you should consider medical evaluation. Monitor your "
        "condition closely, stay hydrated, and don't hesitate to contact a "
        "healthcare provider for guidance."
    ),
    RiskCategory.HIGH: (
        "Given your symptoms, it's important to seek medical attention promptly. If "
        "you experience worsening symptoms, difficulty breathing, or severe pain, "
        "contact emergency services immediately."
    ),
}

RISK_GUIDANCE = {
    RiskCategory.LOW: {
        "color": "green",
        "message": "Monitor your condition and rest. Contact a healthcare provider if symptoms worsen.",
    },
    RiskCategory.MODERATE: {
        "color": "yellow",
        "message": "Consider contacting a doctor for further evaluation of your symptoms.",
    },
    RiskCategory.HIGH: {
        "color": "red",
        "message": "Seek immediate medical attention. Contact emergency services if necessary.",
    },
}

SERVICE_UNAVAILABLE_NOTICE = "Unable to fetch AI consultation at this time."

MEDICAL_DISCLAIMER = (
    "This AI-generated guidance is for informational purposes only and should not "
    "replace professional medical consultation. Always seek advice from qualified "
    "healthcare professionals for medical concerns."
)
