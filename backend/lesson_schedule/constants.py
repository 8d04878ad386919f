from __future__ import annotations


DAYS_OF_WEEK: tuple[str, ...] = ("Senin", "Selasa", "Rabu", "Kamis", "Jumat", "Sabtu")

# teacher_id used when a suggested teacher name cannot be resolved.
UNKNOWN_TEACHER_ID = "unknown"

# Display name for dangling teacher/room references.
UNKNOWN_LABEL = "Unknown"

BREAK_LABEL = "ISTIRAHAT"

DEFAULT_PERIODS: tuple[int, ...] = (0, 1, 2, 3, 4, 5, 6, 7, 8, 9, 10, 11, 12)

DEFAULT_TIME_LABELS: dict[float, str] = {
    0: "06:45 - 07:00 (Literasi)",
    1: "07:00 - 07:45",
    2: "07:45 - 08:30",
    3: "08:30 - 09:15",
    4: "09:15 - 10:00",
    4.5: "10:00 - 10:15 (ISTIRAHAT)",
    5: "10:15 - 11:00",
    6: "11:00 - 11:45",
    7: "12:30 - 13:15",
    8: "13:15 - 14:00",
    9: "14:00 - 14:45",
    10: "14:45 - 15:30",
}

# Period 0 is the morning literacy session, not a lesson.
DEFAULT_NON_TEACHING_PERIODS: frozenset[float] = frozenset({0})

# Teaching periods offered to the suggestion generator.
SUGGESTION_PERIODS: tuple[int, ...] = (1, 2, 3, 4, 5, 6, 7, 8)

DEFAULT_CLASS_NAMES: tuple[str, ...] = (
    # Kelas X
    "X AKL 1", "X AKL 2", "X AKL 3",
    "X MPLB 1", "X MPLB 2", "X MPLB 3",
    "X KDS",
    "X KLN",
    "X PM 1", "X PM 2",
    "X PPLG 1", "X PPLG 2",
    "X TJKT 1", "X TJKT 2",
    # Kelas XI
    "XI AK 1", "XI AK 2", "XI AK 3",
    "XI MP 1", "XI MP 2", "XI MP 3",
    "XI TKKR",
    "XI KLN",
    "XI BD",
    "XI BR",
    "XI RPL 1", "XI RPL 2",
    "XI TKJ 1", "XI TKJ 2",
    # Kelas XII
    "XII AK 1", "XII AK 2", "XII AK 3",
    "XII MP 1", "XII MP 2", "XII MP 3",
    "XII TKKR",
    "XII KLN",
    "XII BD",
    "XII BR",
    "XII RPL 1", "XII RPL 2",
    "XII TKJ 1", "XII TKJ 2",
)
