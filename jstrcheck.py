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

import argparse
import logging
from multiprocessing import freeze_support
import sys

from jstr import JStr

import jstrcheck_core.constants as c
from jstrcheck_core.scan import (ScannedFile, ChildProcessException,
                                 console_scan, summary)
from jstrcheck_core.util import format_crash, read_path_list, parse_paths
from jstrcheck_core.version import version_string


def encode_text(text):
    """ Return the hex dump of the Modified UTF-8 encoding of text. """
    st = JStr.from_utf8_str(text)
    return " ".join("{0:02x}".format(b) for b in st.iter_bytes())


def print_texts(scanned_files):
    """ Print the decoded strings of every scanned file. """
    for f in scanned_files:
        if not f.texts:
            continue
        print("\n{0:-^60}".format(' ' + f.path + ' '))
        for i, text in enumerate(f.texts):
            print("{0}: {1}".format(i, JStr.from_utf8_str(text).escape_debug()))


def write_summary(summary_text, log_path):
    """ Write the summary of the scan to log_path, '-' prints it. """
    if log_path == '-':
        print(summary_text)
        return
    try:
        with open(log_path, 'w') as f:
            f.write(summary_text)
        print("Log file saved in \'{0}\'".format(log_path))
    except (IOError, OSError) as e:
        print("Something went wrong while saving the log file!")
        print(e)


def main(argv=None):
    usage = '%(prog)s [options] <file> <other-file> ...'
    epilog = ('Copyright (C) 2026  The jstr authors\n'
              'This program comes with ABSOLUTELY NO WARRANTY; for '
              'details see the GNU General Public License version 3 '
              '(<https://www.gnu.org/licenses/gpl-3.0.html>). This is '
              'free software, and you are welcome to redistribute it under '
              'the terms of that license.')

    parser = argparse.ArgumentParser(description=('Program to check that files of '
                                                  'strings are valid Modified UTF-8, '
                                                  'the text encoding of JVM class files.'),
                                     prog='jstrcheck',
                                     usage=usage,
                                     epilog=epilog)

    parser.add_argument('--text-file-input',
                        '--tf',
                        help=('Path to a text file with a list of files to scan. One '
                              'line per element, wildcards can be used, empty lines '
                              'will be ignored and # can be used at the start of a line as comment'
                              '. These will be treated the same as adding paths to command input.'),
                        metavar='<text_file_input>',
                        type=str,
                        dest='text_file_input',
                        default=None)

    parser.add_argument('--raw',
                        '-r',
                        help=('Treat every file as one single Modified UTF-8 string. By '
                              'default files are read as a sequence of strings, each one '
                              'preceded by its length as a big-endian u2, like '
                              'DataOutput.writeUTF() writes them.'),
                        action='store_true',
                        default=False)

    parser.add_argument('--encode',
                        '-e',
                        help=('Print the Modified UTF-8 bytes of the given text, in '
                              'hexadecimal, and exit.'),
                        metavar='<text>',
                        type=str,
                        default=None)

    parser.add_argument('--print',
                        '-P',
                        help='Print all the valid strings found in the scanned files.',
                        action='store_true',
                        default=False,
                        dest='print_texts')

    parser.add_argument('--processes',
                        '-p',
                        help='Set the number of workers to use for scanning. (default '
                             '= 1, not use multiprocessing at all)',
                        action='store',
                        type=int,
                        default=1)

    status_abbr = ""
    for problem, text, abbr in c.FILE_PROBLEMS_ITERATOR:
        status_abbr += "{0}: {1}; ".format(abbr, text)
    parser.add_argument('--verbose',
                        '-v',
                        help=('Don\'t use a progress bar, instead print a line per '
                              'scanned file with results information. The '
                              'letters mean:\n') + status_abbr,
                        action='store_true',
                        default=False)

    parser.add_argument('--log',
                        '-l',
                        help='Save a log of all the problems found in the specified '
                             'file. The log file contains all the problems found with '
                             'this information: file, string number, problem and byte '
                             'offset. Use \'-\' as name to show the log at the end '
                             'of the scan.',
                        type=str,
                        default=None,
                        dest='summary')

    parser.add_argument('--debug',
                        help='Print debug messages of the scan.',
                        action='store_true',
                        default=False)

    parser.add_argument('paths',
                        help='List with the files to scan',
                        nargs='*')

    args = parser.parse_args(argv)

    if args.debug:
        logging.getLogger().setLevel(logging.DEBUG)

    if args.processes < 1:
        parser.error("Error: The number of processes must be at least 1!")

    if args.encode is not None:
        print(encode_text(args.encode))
        return c.RV_OK

    # First, read paths from file
    path_lines = []
    if args.text_file_input:
        try:
            path_lines = read_path_list(args.text_file_input)
        except (IOError, OSError):
            print("Something went wrong while reading the text file input!")

    # Parse all the paths, from text file and command input
    file_list = parse_paths(args.paths + path_lines)

    # print greetings an version number
    print("\nWelcome to JStr Check!")
    print(("(v {0})".format(version_string)))

    if not file_list:
        print('Error: No files to scan! Use '
              '--help for a complete list of options.')
        return c.RV_NOTHING_TO_SCAN

    framing = c.FRAMING_RAW if args.raw else c.FRAMING_RECORDS
    scanned_files = [ScannedFile(path) for path in file_list]
    scanned_files = console_scan(scanned_files, args.processes, framing,
                                 args.print_texts, args.verbose)

    if args.print_texts:
        print_texts(scanned_files)

    summary_text = summary(scanned_files)
    print(summary_text)
    if args.summary:
        write_summary(summary_text, args.summary)

    if any(f.has_problems for f in scanned_files):
        return c.RV_BAD_STRINGS
    return c.RV_OK


def run():
    """ Console script entry point. """
    ERROR_MSG = "\n\nOps! Something went really wrong and jstrcheck crashed.\n"
    bug_report = None
    value = 0

    try:
        freeze_support()
        value = main()

    except SystemExit as e:
        # sys.exit() was called within the program
        value = e.code

    except ChildProcessException as e:
        print(ERROR_MSG)
        bug_report = e.printable_traceback
        value = c.RV_CRASH

    except Exception:
        print(ERROR_MSG)
        bug_report = format_crash(*sys.exc_info())
        value = c.RV_CRASH

    if bug_report:
        print("")
        print("Bug report:")
        print("")
        print(bug_report)
    return value


if __name__ == '__main__':
    sys.exit(run())
