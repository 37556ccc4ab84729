"""
notekeeper — Services Layer
===========================

What:  Logic between the CLI (argv) and the database (persistence).

Service Inventory:
    - NoteStore: transactional note CRUD with name uniqueness
    - read_note_body: interactive capture up to the `#endnote#` line
    - CommandDispatcher: one command → one store call → one DispatchResult
"""
