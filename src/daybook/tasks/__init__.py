"""
Task subsystem.

Components:
- task_models.py: data structures (Task, Note, Workspace, CompletionRecord)
- task_store.py: today-only task mutations + workspace lifecycle
- rollover.py: day rollover with pinned carry-forward
- navigation.py: day navigation state machine (settled / transitioning)
- ledger.py: append-only completion history
"""
