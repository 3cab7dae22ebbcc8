#!/usr/bin/env python
# -*- coding: utf-8 -*-

#
#   JStr Check.
#   Check the Modified UTF-8 strings of JVM class file tooling.
#   Copyright (C) 2026  The jstr authors
#
#    This program is free software: you can redistribute it and/or modify
#    it under the terms of the GNU General Public License as published by
#    the Free Software Foundation, either version 3 of the License, or
#    (at your option) any later version.
#
#    This program is distributed in the hope that it will be useful,
#    but WITHOUT ANY WARRANTY; without even the implied warranty of
#    MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE.  See the
#    GNU General Public License for more details.
#
#    You should have received a copy of the GNU General Public License
#    along with this program.  If not, see <http://www.gnu.org/licenses/>.
#



################
# Return values
################

RV_OK = 0  # files scanned and no problems found
RV_CRASH = 1  # crash or end unexpectedly
RV_NOTHING_TO_SCAN = 20  # no files to scan
# RV_WRONG_COMMAND = 2  # the command line used is wrong. argparse uses this value by default
RV_BAD_STRINGS = 3  # scan completed successfully but problems have been found in the scan


# --------------
# File related:
# --------------
# Used to mark the status of scanned files:
FILE_NOT_SCANNED = -1
FILE_OK = 0
FILE_INVALID_STRINGS = 1
FILE_TRUNCATED = 2
FILE_UNREADABLE = 3

# Status that are considered problems
FILE_PROBLEMS = [FILE_INVALID_STRINGS,
                 FILE_TRUNCATED,
                 FILE_UNREADABLE]

# Text describing each file status
FILE_STATUS_TEXT = {FILE_NOT_SCANNED: "Not scanned",
                    FILE_OK: "OK",
                    FILE_INVALID_STRINGS: "Invalid strings",
                    FILE_TRUNCATED: "Truncated",
                    FILE_UNREADABLE: "Unreadable"
                    }

# used in some places where there is less space
FILE_PROBLEMS_ABBR = {FILE_INVALID_STRINGS: 'is',
                      FILE_TRUNCATED: 't',
                      FILE_UNREADABLE: 'u'
                      }

# list with problem, status-text, problem abbr tuples
FILE_PROBLEMS_ITERATOR = []
for problem in FILE_PROBLEMS:
    FILE_PROBLEMS_ITERATOR.append((problem,
                                   FILE_STATUS_TEXT[problem],
                                   FILE_PROBLEMS_ABBR[problem]))


# --------------
# String related:
# --------------
# How the strings are laid out in a scanned file
FRAMING_RECORDS = 'records'  # u2 length + bytes, one after another
FRAMING_RAW = 'raw'  # the whole file is one string

# Text for the error lengths reported by the validator
ERROR_LEN_TEXT = {1: "invalid byte",
                  2: "bad 2-byte sequence",
                  3: "bad or unpaired 3-byte sequence",
                  6: "bad surrogate pair",
                  None: "truncated sequence"
                  }
