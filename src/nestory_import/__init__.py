"""Home-inventory spreadsheet import pipeline.

Parse delimited text files, map their columns onto inventory item fields,
validate rows and commit them through a persistence store.
"""

__version__ = "0.1.0"
