"""
tsk TUI - interactive terminal task list.

Architecture:
- providers.py: Task entities + storage protocol
- task_store.py: SQLite implementation of the storage protocol
- formatter.py: Task -> display row
- table.py: table view model (state, sorting, rendering)
- keys.py: fixed key map
- controller.py: startup + input dispatch state machine
- app.py: Textual host
"""
