"""
The `base` sub-package contains one module:

`sanity`
--------
Contains several sanity checks performed during the execution
of the PrePhylo CLI program.
"""
