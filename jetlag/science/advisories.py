"""
Safety and sleep-environment advisories attached to every plan.

Recovery estimates are population averages; these blocks carry the
disclaimers and the profile-specific notes (age, chronotype) that are
deliberately kept out of the numeric estimates.
"""

from ..types import EnvironmentOptimization, SafetyInformation, UserPreferences

SENIOR_AGE = 65

MEDICAL_DISCLAIMER = (
    "IMPORTANT MEDICAL DISCLAIMER: This jetlag recovery plan is for general informational "
    "and educational purposes only and does NOT constitute medical advice, diagnosis, or "
    "treatment. Individual recovery times vary significantly (20-40% between people) based "
    "on genetics, health status, and other factors. Always consult with a qualified "
    "healthcare provider before starting any supplement regimen (including melatonin), "
    "especially if you have underlying health conditions, take medications, are "
    "pregnant/nursing, or are over 65."
)

AGGRESSIVE_MODE_NOTICE = (
    " AGGRESSIVE MODE NOTICE: This protocol requires strict compliance with daily light "
    "therapy sessions, strategic caffeine timing, strategic naps during the acute phase, and "
    "precise sleep scheduling. Recovery estimates assume 80%+ compliance. Non-compliance may "
    "result in slower recovery similar to conservative mode."
)


def generate_safety_information(preferences: UserPreferences | None = None) -> SafetyInformation:
    """Build the safety block, adding profile-specific notes when known."""
    aggressive = preferences is not None and preferences.recovery_mode == "aggressive"

    important_notes = []
    if preferences and preferences.age is not None and preferences.age >= SENIOR_AGE:
        important_notes.append(
            "AGE CONSIDERATION: Adults 65+ may need 20-30% longer recovery time than "
            "estimated. Monitor your symptoms closely and allow extra time for important "
            "activities."
        )
    if preferences and preferences.chronotype == "morning_lark":
        important_notes.append(
            "CHRONOTYPE NOTE: Morning larks may find eastward travel slightly easier and "
            "westward travel more challenging."
        )
    elif preferences and preferences.chronotype == "night_owl":
        important_notes.append(
            "CHRONOTYPE NOTE: Night owls may find westward travel slightly easier and "
            "eastward travel more challenging."
        )
    important_notes.extend(
        [
            "Individual variation is HIGH: research shows 20-40% difference in recovery time "
            "between people with similar demographics",
            "Alcohol significantly worsens jetlag symptoms - avoid for first 48 hours",
            "If you feel unsafe driving or operating machinery, do not do so",
            "Recovery estimates are based on population averages, not individual predictions",
        ]
    )

    return SafetyInformation(
        disclaimer=MEDICAL_DISCLAIMER + (AGGRESSIVE_MODE_NOTICE if aggressive else ""),
        melatonin_contraindications=[
            "Pregnancy or breastfeeding",
            "Autoimmune disorders",
            "Seizure disorders or history of seizures",
            "Depression or other mood disorders",
            "Bleeding disorders or taking blood thinners",
            "Diabetes or blood sugar regulation issues",
        ],
        melatonin_interactions=[
            "Blood pressure medications (may enhance effects)",
            "Diabetes medications (may affect blood sugar)",
            "Sedatives or sleep medications (increased drowsiness)",
            "Blood thinners (may slow blood clotting)",
        ],
        melatonin_starting_dosage=(
            "Always start with the lowest dose (0.5mg) to assess your individual response. "
            "Take 2 hours before planned bedtime. Do not exceed 5mg without medical supervision."
        ),
        light_therapy_contraindications=[
            "Retinal disorders or macular degeneration",
            "Photosensitivity or taking photosensitizing medications",
            "Bipolar disorder or history of mania",
            "Recent eye surgery or eye injury",
        ],
        light_therapy_warnings=[
            "Stop immediately if you experience eye pain, visual disturbances, or headaches",
            "Do not look directly at light therapy devices",
            "Start with 10-15 minutes and gradually increase to recommended duration",
        ],
        seek_medical_advice=[
            "Severe insomnia lasting more than 3 consecutive days",
            "Extreme fatigue that affects your ability to function safely",
            "Significant mood changes, depression, or anxiety",
            "Confusion, disorientation, or memory problems beyond typical jetlag",
        ],
        important_notes=important_notes,
    )


def generate_environment_optimization() -> EnvironmentOptimization:
    return EnvironmentOptimization(
        bedroom={
            "temperature": "60-67°F (15-19°C) - cooler temperatures promote better sleep.",
            "darkness": "Complete darkness is ideal. Use blackout curtains or a sleep mask.",
            "noise": "Use earplugs, a white noise machine, or a fan for consistent sound.",
            "humidity": "30-50% relative humidity.",
        },
        morning_light_timing=(
            "Get bright light within 15 minutes of waking. Earlier is better for "
            "circadian adjustment."
        ),
        morning_light_sources=[
            "Natural sunlight (best option): go outside or sit by an open window",
            "Light therapy box: 10,000 lux at 16-24 inches distance",
            "Open all curtains/blinds immediately upon waking",
        ],
        light_box_guidance=(
            "Position the device at a 45-degree angle, not directly in front of your eyes. "
            "Keep it in peripheral vision while you read, eat, or work."
        ),
        evening_light_timing=(
            "Begin dimming lights 2-3 hours before planned bedtime to let melatonin rise."
        ),
        evening_light_recommendations=[
            "Use warm-toned bulbs (2700K or lower) in the bedroom",
            "Use dimmers or table lamps instead of overhead lights",
            "Keep bedroom lighting under 50 lux",
        ],
        evening_light_technology=[
            "Enable blue light filters on phones, tablets, and computers after 6 PM",
            "Consider amber-tinted blue-blocking glasses for evening screen use",
        ],
    )
