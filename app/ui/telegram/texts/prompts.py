MAIN_MENU = "Choose an action."
CANCELLED = "Cancelled."
NOT_AUTHORIZED = "Not authorized."

ASK_TASK_TITLE = "Send the task title (one message). Add !low / !medium / !high at the end for priority."
ASK_NEW_TASK_TITLE = "Send the new title (one message)."
EMPTY_TITLE = "An empty title is not accepted. Send the title."
TASK_ADDED = "Task added."
TASK_NOT_FOUND = "Task not found (maybe it was just synced). Open /tasks again."
NO_TASKS = "No tasks."

ASK_NOTE_TITLE = "Send the note title."
ASK_NOTE_CONTENT = "Send the note content. Add a last line starting with # for tags, e.g. '# work, ideas'."
NOTE_ADDED = "Note added."
NO_NOTES = "No notes."
NOTE_NOT_FOUND = "Note not found."

EVENT_USAGE = "Usage: /event <YYYY-MM-DD|today|tomorrow> <HH:MM> <HH:MM> <title>"
EVENT_ADDED = "Event added."
NO_EVENTS = "No events."

CATEGORY_USAGE = "Usage: /category_add <name> <#rrggbb>"
POMODORO_USAGE = "Usage: /pomodoro_set <work> <short break> <long break> <sessions until long break>"

SYNCING = "Syncing..."
