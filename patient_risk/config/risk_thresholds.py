"""Clinical scoring thresholds.

These values define the submitted classification and are fixed; they are not
read from the environment so that every run scores records the same way.
"""

# Total risk score (bp + temperature + age) at or above which a patient is high risk
HIGH_RISK_THRESHOLD = 4

# Parsed temperature (°F) at or above which a patient has a fever
FEVER_THRESHOLD = 99.6

# Blood pressure brackets (mmHg)
SYSTOLIC_NORMAL_BELOW = 120
SYSTOLIC_ELEVATED_MAX = 129
SYSTOLIC_STAGE_1_MIN = 130
SYSTOLIC_STAGE_1_MAX = 139
SYSTOLIC_STAGE_2_MIN = 140
DIASTOLIC_NORMAL_BELOW = 80
DIASTOLIC_STAGE_1_MAX = 89
DIASTOLIC_STAGE_2_MIN = 90

# Temperature brackets (°F)
TEMP_NORMAL_MAX = 99.5
TEMP_LOW_FEVER_MIN = 99.6
TEMP_LOW_FEVER_MAX = 100.9
TEMP_HIGH_FEVER_MIN = 101.0

# Age above which the highest age score applies
AGE_SENIOR_ABOVE = 65
