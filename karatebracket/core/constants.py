"""Global constants for the karatebracket application."""

# Collection names
BRACKETS_COLLECTION = "brackets"
CATEGORIES_COLLECTION = "categories"
PARTICIPANTS_COLLECTION = "participants"
TEAMS_COLLECTION = "teams"
DOJOS_COLLECTION = "dojos"
USERS_COLLECTION = "users"

# Modalities
MODALITY_INDIVIDUAL = "individual"
MODALITY_TEAM = "team"
MODALITIES = (MODALITY_INDIVIDUAL, MODALITY_TEAM)

# Slot states
SLOT_EMPTY = "empty"
SLOT_BYE = "bye"
SLOT_FILLED = "filled"
SLOT_NAMES = ("competitor1", "competitor2")

# Match statuses
MATCH_PENDING = "pending"
MATCH_IN_PROGRESS = "in_progress"
MATCH_FINISHED = "finished"

# Bracket statuses
BRACKET_GENERATED = "generated"
BRACKET_IN_PROGRESS = "in_progress"
BRACKET_FINISHED = "finished"

# Team roster status that makes a team eligible
TEAM_ACTIVE = "active"

# Gender value that disables the gender filter
GENDER_MIXED = "mixed"

# Grades accepted per category level
NOVICE_GRADES = ("10 Kyu", "9 Kyu", "8 Kyu", "7 Kyu")
ADVANCED_GRADES = ("6 Kyu", "5 Kyu", "4 Kyu", "3 Kyu", "2 Kyu", "1 Kyu", "Dan")
LEVEL_GRADES = {"novice": NOVICE_GRADES, "advanced": ADVANCED_GRADES}

MIN_COMPETITORS = 2
DEFAULT_PUBLIC_TOKEN_BYTES = 16
