#!/usr/bin/env python3
# -*- coding: utf-8 -*-
#
#  Copyright 2012 Unknown <diogo@arch>
#
#  This program is free software; you can redistribute it and/or modify
#  it under the terms of the GNU General Public License as published by
#  the Free Software Foundation; either version 2 of the License, or
#  (at your option) any later version.
#
#  This program is distributed in the hope that it will be useful,
#  but WITHOUT ANY WARRANTY; without even the implied warranty of
#  MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE.  See the
#  GNU General Public License for more details.
#
#  You should have received a copy of the GNU General Public License
#  along with this program; if not, write to the Free Software
#  Foundation, Inc., 51 Franklin Street, Fifth Floor, Boston,
#  MA 02110-1301, USA.

"""
Custom exceptions raised by the :mod:`~prephylo.process` modules.

All of them are fatal for the current run. The engine raises them and
only the PrePhylo CLI decides how to report them to the user.
"""


class PrePhyloException(Exception):
    """Base class of every exception raised by the process modules."""

    def __init__(self, value=""):
        super(PrePhyloException, self).__init__(value)
        self.message = value

    def __str__(self):
        return repr(self.message)


class ConfigurationError(PrePhyloException):
    """Raised when an input, filter, dictionary or partition file, or an
    external executable, is missing or cannot be read."""
    pass


class MalformedInput(PrePhyloException):
    """Raised when sequence data appears before any FASTA header."""
    pass


class AlignmentUnequalLength(MalformedInput):
    """Raised when sequences in alignment have unequal length."""
    pass


class DuplicateTaxa(PrePhyloException):
    pass


class EmptyAlignment(PrePhyloException):
    pass


class GblocksError(PrePhyloException):
    """Raised when Gblocks did not produce its output file."""
    pass


__author__ = "Diogo N. Silva"
