"""
Introduction to PrePhylo's process module
=========================================

The `process` subpackage is the main backend of the PrePhylo CLI program.
The most important classes are defined in the
:mod:`~prephylo.process.sequence` module:
:class:`~prephylo.process.sequence.Alignment` and
:class:`~prephylo.process.sequence.Concatenator`.

What it does
------------

The `process` module contains the classes and functions responsible for
parsing, modifying, splitting, concatenating and writing alignment data.

Submodules description
----------------------

:mod:`~prephylo.process.base`
~~~~~~~~~~~~~~~~~~~~~~~~~~~~~
Contains several methods and function that are inherited or used by
:class:`~prephylo.process.sequence.Alignment` and
:class:`~prephylo.process.sequence.Concatenator` objects, as well as by
the PrePhylo CLI program.

:mod:`~prephylo.process.data`
~~~~~~~~~~~~~~~~~~~~~~~~~~~~~
Contains the :class:`~prephylo.process.data.Partitions` class, used to
split alignments by partition and to keep the partition registry of
concatenated alignments.

:mod:`~prephylo.process.error_handling`
~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~
Contains custom made Exception sub-classes.

:mod:`~prephylo.process.gblocks`
~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~
Runs the Gblocks program on an alignment.

:mod:`~prephylo.process.sequence`
~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~
Contains the :class:`~prephylo.process.sequence.Alignment` and
:class:`~prephylo.process.sequence.Concatenator` classes, responsible
for the majority of the heavy lifting when dealing with alignment files. See
the module's documentation for further details.
"""
