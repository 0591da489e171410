"""Built-in CLI sub-commands for specreport.

* :mod:`~specreport.commands.generate` -- build the report document from a
  specification, optionally filtered.
* :mod:`~specreport.commands.inspect` -- summarize a specification without
  writing anything.

Each module exports a plain callback function registered directly on the
root app.
"""
