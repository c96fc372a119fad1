"""Effort Score lookup tables - single source of truth.

Race times and training paces keyed by Effort Score (a VDOT-style fitness
index). Values follow Jack Daniels' Running Formula tables. Both tables are
ordered by ascending score; times and paces decrease as the score increases.
"""

# Race times in seconds
RACE_TIME_TABLE: tuple[dict[str, float], ...] = (
    {"score": 30, "5k": 1860, "10k": 3900, "half": 8580, "marathon": 17880},
    {"score": 31, "5k": 1800, "10k": 3768, "half": 8292, "marathon": 17280},
    {"score": 32, "5k": 1740, "10k": 3642, "half": 8016, "marathon": 16704},
    {"score": 33, "5k": 1686, "10k": 3528, "half": 7764, "marathon": 16164},
    {"score": 34, "5k": 1632, "10k": 3414, "half": 7518, "marathon": 15648},
    {"score": 35, "5k": 1584, "10k": 3312, "half": 7290, "marathon": 15168},
    {"score": 36, "5k": 1536, "10k": 3210, "half": 7068, "marathon": 14712},
    {"score": 37, "5k": 1488, "10k": 3114, "half": 6858, "marathon": 14280},
    {"score": 38, "5k": 1446, "10k": 3024, "half": 6660, "marathon": 13872},
    {"score": 39, "5k": 1404, "10k": 2940, "half": 6468, "marathon": 13476},
    {"score": 40, "5k": 1362, "10k": 2856, "half": 6288, "marathon": 13104},
    {"score": 41, "5k": 1326, "10k": 2778, "half": 6114, "marathon": 12750},
    {"score": 42, "5k": 1290, "10k": 2700, "half": 5946, "marathon": 12408},
    {"score": 43, "5k": 1254, "10k": 2628, "half": 5790, "marathon": 12084},
    {"score": 44, "5k": 1222, "10k": 2558, "half": 5634, "marathon": 11772},
    {"score": 45, "5k": 1188, "10k": 2490, "half": 5490, "marathon": 11472},
    {"score": 46, "5k": 1158, "10k": 2424, "half": 5346, "marathon": 11184},
    {"score": 47, "5k": 1128, "10k": 2364, "half": 5214, "marathon": 10908},
    {"score": 48, "5k": 1098, "10k": 2304, "half": 5082, "marathon": 10644},
    {"score": 49, "5k": 1072, "10k": 2244, "half": 4956, "marathon": 10392},
    {"score": 50, "5k": 1044, "10k": 2190, "half": 4836, "marathon": 10152},
    {"score": 51, "5k": 1020, "10k": 2136, "half": 4716, "marathon": 9918},
    {"score": 52, "5k": 996, "10k": 2088, "half": 4608, "marathon": 9696},
    {"score": 53, "5k": 972, "10k": 2040, "half": 4500, "marathon": 9480},
    {"score": 54, "5k": 951, "10k": 1992, "half": 4398, "marathon": 9276},
    {"score": 55, "5k": 930, "10k": 1950, "half": 4302, "marathon": 9078},
    {"score": 56, "5k": 909, "10k": 1908, "half": 4206, "marathon": 8892},
    {"score": 57, "5k": 891, "10k": 1866, "half": 4116, "marathon": 8712},
    {"score": 58, "5k": 873, "10k": 1830, "half": 4032, "marathon": 8538},
    {"score": 59, "5k": 855, "10k": 1794, "half": 3954, "marathon": 8376},
    {"score": 60, "5k": 838, "10k": 1758, "half": 3876, "marathon": 8220},
    {"score": 65, "5k": 762, "10k": 1596, "half": 3522, "marathon": 7482},
    {"score": 70, "5k": 696, "10k": 1458, "half": 3222, "marathon": 6858},
    {"score": 75, "5k": 642, "10k": 1344, "half": 2970, "marathon": 6330},
    {"score": 80, "5k": 594, "10k": 1248, "half": 2754, "marathon": 5880},
    {"score": 85, "5k": 552, "10k": 1158, "half": 2562, "marathon": 5478},
)

# Training paces in seconds per mile
# base = easy, race = marathon, steady = threshold, power = interval, speed = repetition
PACE_TABLE: tuple[dict[str, float], ...] = (
    {"score": 30, "base": 744, "race": 682, "steady": 622, "power": 568, "speed": 534},
    {"score": 32, "base": 708, "race": 648, "steady": 592, "power": 540, "speed": 508},
    {"score": 34, "base": 672, "race": 618, "steady": 564, "power": 516, "speed": 484},
    {"score": 36, "base": 642, "race": 588, "steady": 538, "power": 492, "speed": 462},
    {"score": 38, "base": 612, "race": 562, "steady": 514, "power": 470, "speed": 442},
    {"score": 40, "base": 585, "race": 537, "steady": 491, "power": 449, "speed": 422},
    {"score": 42, "base": 560, "race": 514, "steady": 470, "power": 430, "speed": 404},
    {"score": 44, "base": 536, "race": 492, "steady": 450, "power": 412, "speed": 387},
    {"score": 45, "base": 525, "race": 482, "steady": 441, "power": 403, "speed": 379},
    {"score": 46, "base": 514, "race": 472, "steady": 432, "power": 395, "speed": 371},
    {"score": 48, "base": 494, "race": 453, "steady": 415, "power": 379, "speed": 357},
    {"score": 50, "base": 474, "race": 436, "steady": 399, "power": 365, "speed": 343},
    {"score": 52, "base": 456, "race": 419, "steady": 383, "power": 351, "speed": 330},
    {"score": 54, "base": 439, "race": 403, "steady": 369, "power": 338, "speed": 318},
    {"score": 56, "base": 423, "race": 388, "steady": 355, "power": 325, "speed": 306},
    {"score": 58, "base": 408, "race": 375, "steady": 343, "power": 314, "speed": 295},
    {"score": 60, "base": 394, "race": 362, "steady": 331, "power": 303, "speed": 285},
    {"score": 65, "base": 362, "race": 332, "steady": 304, "power": 278, "speed": 262},
    {"score": 70, "base": 334, "race": 306, "steady": 280, "power": 256, "speed": 241},
    {"score": 75, "base": 309, "race": 284, "steady": 260, "power": 238, "speed": 224},
    {"score": 80, "base": 287, "race": 264, "steady": 241, "power": 221, "speed": 208},
)

# Key column shared by both tables
SCORE_KEY = "score"
