"""party-ledgers: supplier and customer ledgers from hand-maintained registers.

The package reads purchase, sales and bank registers, normalizes every row into
a standardized transaction, groups them per party and ledger category, and
renders one statement per party plus a ``Ledger Master`` index into an Excel
workbook.

Architecture
------------
* ``extractor``: header detection, configuration-driven field mapping, workbook/CSV
  source connector and the contact directory.
* ``transformer``: supplier/customer classification and per-party aggregation.
* ``writer``: tabular sink port, openpyxl workbook sink, statement and index
  renderers, run log and workbook initialization.
* ``utils``: amount and date parsing for spreadsheet cells.

Configuration
-------------
Each organization is driven by a flat key-value map read from the workbook's
``CONFIG`` tab or a JSON file. Paths default to the ``data/`` and ``logs/``
trees but respect ``DATA_DIR``, ``OUTPUT_DIR``, ``LOGS_DIR`` and ``CONFIG_DIR``
overrides (also read from ``.env``).

Entrypoints
-----------
:mod:`party_ledgers.main_refresh` orchestrates fetch -> aggregate -> render ->
save for one ledger workbook.

Examples
--------
Create the configuration tabs, then refresh:

    >>> python -m party_ledgers.main_refresh --workbook ledgers.xlsx --init
    >>> python -m party_ledgers.main_refresh --workbook ledgers.xlsx
"""

__version__ = "0.1.0"
__all__ = ["__version__"]
