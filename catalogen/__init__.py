"""
Catalogen - Catalog indexing and route generation for static sites.

Catalogen turns a directory of integration records (connector entries
stored as JSON) into the route table and data artifacts a static site
renderer needs: one page per item, a full listing, a categories index,
and one listing per category.

Hand me a folder of half-consistent JSON and I'll hand you back a
route graph with no duplicates. Mostly because I refuse to build one
with duplicates.
"""

__version__ = "1.0.0"
__author__ = "Catalogen Contributors"
