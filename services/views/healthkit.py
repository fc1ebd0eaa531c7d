"""HealthKit identifiers and helpers shared by the day, month and year views."""
from typing import Any, Dict, Iterable, List, Optional

SLEEP = "HKCategoryTypeIdentifierSleepAnalysis"
HEART_RATE = "HKQuantityTypeIdentifierHeartRate"
RESTING_HEART_RATE = "HKQuantityTypeIdentifierRestingHeartRate"
WALKING_HEART_RATE = "HKQuantityTypeIdentifierWalkingHeartRateAverage"
STEP_COUNT = "HKQuantityTypeIdentifierStepCount"
DISTANCE_WALKING_RUNNING = "HKQuantityTypeIdentifierDistanceWalkingRunning"
OXYGEN_SATURATION = "HKQuantityTypeIdentifierOxygenSaturation"
RESPIRATORY_RATE = "HKQuantityTypeIdentifierRespiratoryRate"
HRV_SDNN = "HKQuantityTypeIdentifierHeartRateVariabilitySDNN"
FLIGHTS_CLIMBED = "HKQuantityTypeIdentifierFlightsClimbed"
SLEEPING_WRIST_TEMPERATURE = "HKQuantityTypeIdentifierAppleSleepingWristTemperature"

SLEEP_STAGE_VALUES = {
    "HKCategoryValueSleepAnalysisAsleepDeep": "deep",
    "HKCategoryValueSleepAnalysisAsleepCore": "core",
    "HKCategoryValueSleepAnalysisAsleepREM": "rem",
    "HKCategoryValueSleepAnalysisAwake": "awake",
}

WORKOUT_TYPE_NAMES = {
    "HKWorkoutActivityTypeRunning": "Running",
    "HKWorkoutActivityTypeWalking": "Walking",
    "HKWorkoutActivityTypeCycling": "Cycling",
    "HKWorkoutActivityTypeSwimming": "Swimming",
    "HKWorkoutActivityTypeYoga": "Yoga",
    "HKWorkoutActivityTypeHiking": "Hiking",
    "HKWorkoutActivityTypeStrengthTraining": "Strength Training",
    "HKWorkoutActivityTypeElliptical": "Elliptical",
    "HKWorkoutActivityTypeFunctionalStrengthTraining": "Functional Training",
    "HKWorkoutActivityTypeTraditionalStrengthTraining": "Weight Training",
    "HKWorkoutActivityTypeCoreTraining": "Core Training",
    "HKWorkoutActivityTypeHighIntensityIntervalTraining": "HIIT",
    "HKWorkoutActivityTypeJumping": "Jumping",
    "HKWorkoutActivityTypeDance": "Dance",
    "HKWorkoutActivityTypeBarre": "Barre",
    "HKWorkoutActivityTypePilates": "Pilates",
    "HKWorkoutActivityTypeMindAndBody": "Mind & Body",
    "HKWorkoutActivityTypeSoccer": "Soccer",
    "HKWorkoutActivityTypeBasketball": "Basketball",
    "HKWorkoutActivityTypeTennis": "Tennis",
    "HKWorkoutActivityTypeBadminton": "Badminton",
    "HKWorkoutActivityTypeTableTennis": "Table Tennis",
    "HKWorkoutActivityTypeArchery": "Archery",
}


def workout_type_name(workout_type: str) -> str:
    return WORKOUT_TYPE_NAMES.get(workout_type) or workout_type.replace("HKWorkoutActivityType", "")


def to_number(value: Any) -> Optional[float]:
    if value is None or value == "":
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


def records_of(records: Iterable[Dict[str, Any]], record_type: str) -> List[Dict[str, Any]]:
    """Rows of one type with a non-empty value."""
    return [r for r in records if r.get("type") == record_type and r.get("value")]


def numeric_values(records: Iterable[Dict[str, Any]], scale: float = 1.0) -> List[float]:
    values = []
    for r in records:
        number = to_number(r.get("value"))
        if number is not None:
            values.append(number * scale)
    return values
