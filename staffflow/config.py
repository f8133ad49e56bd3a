# Simulation Configuration

# ---------------------------------------------------------
# 1. Units
# Fixed enumeration order. Staff reassignment scans units in this order.
# ---------------------------------------------------------
UNIT_ICU = 'ICU'
UNIT_ER = 'ER'
UNIT_MEDSURG = 'MEDSURG'
UNIT_PEDS = 'PEDS'

UNITS = (UNIT_ICU, UNIT_ER, UNIT_MEDSURG, UNIT_PEDS)

DEFAULT_PATIENT_COUNT = 30

# ---------------------------------------------------------
# 2. Acuity
# 1 = stable, 5 = most critical
# ---------------------------------------------------------
MIN_ACUITY = 1
MAX_ACUITY = 5

CONDITIONS = {
    1: ['Stable', 'Recovering Well', 'Ready for Discharge'],
    2: ['Stable', 'Improving', 'Monitoring'],
    3: ['Moderate', 'Stable', 'Under Observation'],
    4: ['Serious', 'Requires Attention', 'Unstable'],
    5: ['Critical', 'Life-Threatening', 'Intensive Care'],
}

# ---------------------------------------------------------
# 3. Patient Flow Probabilities (per tick, before decay)
# ---------------------------------------------------------

# Discharge chance by acuity. Lower acuity leaves sooner.
DISCHARGE_RATES = {
    1: 0.20,
    2: 0.15,
    3: 0.10,
    4: 0.05,
    5: 0.02,
}

# Admission: chance that any admission happens, then 1-3 patients
ADMISSION_CHANCE = 0.3
ADMISSION_BATCH = (1, 3)

# Unit of an admitted patient (PMF)
ADMISSION_UNIT_WEIGHTS = {
    UNIT_ER: 0.40,
    UNIT_ICU: 0.20,
    UNIT_MEDSURG: 0.20,
    UNIT_PEDS: 0.20,
}

ACUITY_DRIFT_CHANCE = 0.2
TRANSFER_CHANCE = 0.05

# Transfer destinations forced by acuity (otherwise uniform over UNITS)
CRITICAL_TRANSFER_ACUITY = 4
CRITICAL_TRANSFER_UNIT = UNIT_ICU
STABLE_TRANSFER_ACUITY = 1
STABLE_TRANSFER_UNIT = UNIT_MEDSURG

# ---------------------------------------------------------
# 4. Convergence Schedule
# f = min(tick / CONVERGENCE_TICKS, 1)
# randomness = 1 - RANDOMNESS_DECAY * f
# ---------------------------------------------------------
CONVERGENCE_TICKS = 20
RANDOMNESS_DECAY = 0.7

# Suggestions applied per tick: ceil(BASE + GROWTH * f)
SUGGESTIONS_BASE = 1
SUGGESTIONS_GROWTH = 2

# Workload gap a suggestion must exceed: START - SHRINK * f
GAP_THRESHOLD_START = 3
GAP_THRESHOLD_SHRINK = 2

# ---------------------------------------------------------
# 5. Capacity Thresholds
# ---------------------------------------------------------
UNDERUTILIZED_RATIO = 0.6  # rebalancing targets must be below this
UNIT_OVERLOAD_RATIO = 0.7  # unit pulls staff above this
UNIT_DONOR_RATIO = 0.4     # unit may donate staff below this
MIN_DONOR_STAFF = 2
STATS_BUSY_RATIO = 0.8     # "overloaded" count reported by stats

# Capacity assumed for a unit with no staff when averaging
DEFAULT_UNIT_CAPACITY = 8

# Initial seeding: at most this many staff absorb each unit's patients
SEED_STAFF_PER_UNIT = 2

ALERT_TOO_MANY_PATIENTS = 'Too many patients!'
ALERT_WORKLOAD_TOO_HIGH = 'Workload too high!'

# ---------------------------------------------------------
# 6. Balance Classification
# ---------------------------------------------------------
STATUS_IDEAL = 'IDEAL'
STATUS_SUFFICIENT = 'SUFFICIENT'
STATUS_INADEQUATE = 'INADEQUATE'

IDEAL_MAX_COUNT = 2
IDEAL_MAX_STD = 1.0
SUFFICIENT_MAX_COUNT = 4
SUFFICIENT_MAX_STD = 1.5

# ---------------------------------------------------------
# 7. Timing & History
# ---------------------------------------------------------
HISTORY_LIMIT = 50
TICK_INTERVAL = 1.0  # simulated time units between ticks when driven by run()

# ---------------------------------------------------------
# 8. Shifts
# Minutes are offsets from shift start.
# ---------------------------------------------------------
SHIFT_MORNING = 'morning'
SHIFT_AFTERNOON = 'afternoon'
SHIFT_NIGHT = 'night'

SHIFT_DEFINITIONS = {
    SHIFT_MORNING: {'start': '06:00', 'end': '14:00', 'hours': 8},
    SHIFT_AFTERNOON: {'start': '14:00', 'end': '22:00', 'hours': 8},
    SHIFT_NIGHT: {'start': '22:00', 'end': '06:00', 'hours': 8},
}

BREAK_PLAN = [
    ('lunch', 240, 30),
    ('short', 120, 15),
    ('short', 360, 15),
]
