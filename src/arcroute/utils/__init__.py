"""
Utility helpers for arcroute.

Components that sit around the solver rather than inside it:

• Command-line interface helpers (`cli.py`).
• Solution and statistics files (`save_results.py`).
• Graphviz export of a network (`graph_export.py`).
• Logging colour codes and progress bars (`logging.py`).
"""
