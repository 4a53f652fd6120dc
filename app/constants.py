"""
Defaults and user-facing texts for the store.
"""
from __future__ import annotations

# Durable snapshot slot (one per installation)
DEFAULT_SNAPSHOT_SLOT = "life-dashboard-storage"
SNAPSHOT_VERSION = 1

# Record kinds (also the REST resource names)
KIND_TASK = "task"
KIND_NOTE = "note"
KIND_EVENT = "event"

# Record sync states
STATE_PENDING = "pending"
STATE_CONFIRMED = "confirmed"
STATE_ORPHANED = "orphaned"

# (name, color)
DEFAULT_CATEGORIES = [
    ("Personal", "#3b82f6"),
    ("Work", "#10b981"),
    ("Study", "#8b5cf6"),
    ("Health", "#ef4444"),
    ("Finance", "#f59e0b"),
]

# (name, value, color, description, icon)
DEFAULT_LIFE_BALANCE_AREAS = [
    ("Physical Health", 7, "#F97316", "Exercise, nutrition, sleep", "Activity"),
    ("Mental Wellbeing", 6, "#D946EF", "Mindfulness, stress management", "BrainCircuit"),
    ("Relationships", 8, "#8B5CF6", "Family, friends, community", "Users"),
    ("Career", 7, "#0EA5E9", "Work, skills, achievements", "Briefcase"),
    ("Personal Growth", 5, "#10b981", "Learning, creativity, hobbies", "Sparkles"),
    ("Spiritual", 6, "#f59e0b", "Purpose, values, faith", "BookHeart"),
]

# (name, arabic name, HH:MM); placeholders until a prayer-times source is wired in
DEFAULT_PRAYER_TIMES = [
    ("Fajr", "الفجر", "05:30"),
    ("Sunrise", "الشروق", "06:45"),
    ("Dhuhr", "الظهر", "12:15"),
    ("Asr", "العصر", "15:30"),
    ("Maghrib", "المغرب", "18:00"),
    ("Isha", "العشاء", "19:30"),
]

# Notifications: {kind} is "task" / "note" / "event"
MSG_CREATE_OK = "{Kind} saved"
MSG_CREATE_FAILED = "Failed to save {kind} to server. Changes saved locally."
MSG_UPDATE_OK = "{Kind} updated"
MSG_UPDATE_FAILED = "Failed to update {kind} on server. Changes saved locally."
MSG_COMPLETE_FAILED = "Failed to update {kind} status on server. Changes saved locally."
MSG_DELETE_OK = "{Kind} deleted"
MSG_DELETE_FAILED = "Failed to delete {kind} on server. Restoring {kind} locally."
MSG_FETCH_FAILED = "Failed to load {kind}s from server."
MSG_SESSION_EXPIRED = "Session expired. Please log in again."


def render_message(template: str, kind: str) -> str:
    return template.format(kind=kind, Kind=kind.capitalize())
