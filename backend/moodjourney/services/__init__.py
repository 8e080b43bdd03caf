# Services package init
"""
MoodJourney Backend — Services Layer
=====================================

Service Inventory:
    - UserService:       create, lookup by id/username, create-or-get
    - MoodEntryService:  list with filters, create, partial update, soft delete

Services receive an AsyncSession per call, enforce the validation rules,
run at most one read and one write, and raise application exceptions
(see moodjourney.exceptions). They know nothing about HTTP.
"""
