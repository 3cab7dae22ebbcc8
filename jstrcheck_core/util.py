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


from glob import glob
from os.path import exists, isfile
import traceback


def format_crash(exc_type, value, tb):
    """ Return the bug report text of an exception that stopped the run.

    Keyword arguments:
     - exc_type, value, tb -- As returned by sys.exc_info()

    """

    lines = traceback.format_exception(exc_type, value, tb)
    return "{0}: {1}\n{2}".format(exc_type.__name__, value, "".join(lines))


def read_path_list(text_file):
    """ Read a text file with one path per line.

    Empty lines and lines starting with # are ignored. Returns the list of
    lines.
    """

    lines = []
    with open(text_file, 'r') as tf:
        for line in tf:
            line = line.strip()
            # Remove comment lines and empty lines
            if line and not line.startswith("#"):
                lines.append(line)
    return lines


def parse_paths(args):
    """ Expand the wildcards in args and keep the existing files.

    Keyword arguments:
     - args -- list of paths as argparse got them

    Return:
     - file_list -- A list with the paths of the files to scan

    Prints a warning for every path skipped.
    """

    file_list = []
    for arg in args:
        matches = sorted(glob(arg)) or [arg]
        for f in matches:
            if exists(f):
                if isfile(f):
                    if f not in file_list:
                        file_list.append(f)
                else:
                    print("Warning: \"{0}\" is not a file. Skipping it and scanning the rest.".format(f))
            else:
                print("Warning: The file {0} doesn't exists. Skipping it and scanning the rest.".format(f))
    return file_list
