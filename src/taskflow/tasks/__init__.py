"""
Task subsystem.

Components:
- task_models.py: data structures (Task, Priority) and due-date helpers
- task_validator.py: field checks that collect every violation
- task_store.py: JSON file storage (load / full-replace save)
- task_manager.py: TaskEntityManager, the owner of the task collection
- task_query.py: filter / sort / paginate over a snapshot
- task_stats.py: aggregate counts and due-date urgency
- task_api.py: async facade for event-loop hosts
"""
