"""
Console operations that span more than one store call.

Modules:
    checklist_clone: ChecklistCloner, the all-or-nothing deep copy of a checklist tree
    views: Client-side joins that decorate list rows with names and counts
"""
