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


import sys
import logging
import multiprocessing
from io import BytesIO
from os.path import split
from traceback import extract_tb

from progressbar import ProgressBar, Bar, AdaptiveETA, SimpleProgress

from jstr import JStr, ModifiedUtf8Error
from jstr.constant_pool import ConstantUtf8, MalformedConstantPoolEntry

import jstrcheck_core.constants as c


logging.basicConfig(filename=None, level=logging.CRITICAL)


class ChildProcessException(Exception):
    """ Raised when a child process has problems.

    Inputs:
     - partial_scanned_file -- ScannedFile partially filled with the results
                               of the scan
     - exc_type -- Type of the exception being handled, extracted from sys.exc_info()
     - exc_class -- Text of the exception instance, extracted from sys.exc_info()
     - tb_text -- List of (file, line, function, text) tuples of the traceback

    Stores all the info given by sys.exc_info() and the scanned file object which is
    probably partially filled.

    """

    def __init__(self, partial_scanned_file, exc_type, exc_class, tb_text):
        super(ChildProcessException, self).__init__(exc_class)
        self.scanned_file = partial_scanned_file
        self.exc_type = exc_type
        self.exc_class = exc_class
        self.tb_text = tb_text

    @property
    def printable_traceback(self):
        """ Returns a nice printable traceback.

        This traceback reports:
         - The file that was being scanned
         - The type and class of exception
         - The text of the traceback

        It uses a lot of asteriks as indentation to ensure it doesn't mix with
        the main process traceback.

        """

        text = ""
        scanned_file = self.scanned_file
        text += "*" * 10 + "\n"
        text += "*** Exception while scanning:" + "\n"
        text += "*** " + str(scanned_file.path) + "\n"
        text += "*" * 10 + "\n"
        text += "*** Printing the child's traceback:" + "\n"
        text += "*** Exception:" + str(self.exc_type) + str(self.exc_class) + "\n"
        for tb in self.tb_text:
            text += "*" * 10 + "\n"
            text += "*** File {0}, line {1}, in {2} \n***   {3}".format(*tb)
        text += "\n" + "*" * 10 + "\n"

        return text


class StringProblem(object):
    """ An invalid string found in a scanned file.

    Inputs:
     - index -- Number of the string in the file, starting at 0
     - offset -- Byte offset in the file where the string's bytes start
     - valid_up_to -- Bytes of the string that were valid
     - error_len -- Length of the bad sequence, None if truncated
    """

    def __init__(self, index, offset, valid_up_to, error_len):
        self.index = index
        self.offset = offset
        self.valid_up_to = valid_up_to
        self.error_len = error_len

    @property
    def description(self):
        return "string {0}: {1} at byte {2}".format(
            self.index, c.ERROR_LEN_TEXT[self.error_len],
            self.offset + self.valid_up_to)

    def __repr__(self):
        return "<StringProblem {0}>".format(self.description)


class ScannedFile(object):
    """ Stores all the information of a scanned file.

    Inputs:
     - path -- String with the path of the file.
    """

    def __init__(self, path):
        self.path = path
        self.filename = split(path)[1]
        self.folder = split(split(path)[0])[1]
        # The status of the file.
        self.status = c.FILE_NOT_SCANNED
        # Number of strings found
        self.strings = 0
        # StringProblem objects, one per invalid string
        self.problems = []
        # Decoded text of the valid strings, only filled on request
        self.texts = []
        # Text of the read error for unreadable files
        self.error_text = None

    @property
    def oneliner_status(self):
        """ On line description of the status of the file. """
        if self.status == c.FILE_OK:
            return "strings: {0}".format(self.strings)
        elif self.status == c.FILE_NOT_SCANNED:
            return c.FILE_STATUS_TEXT[self.status]
        text = c.FILE_PROBLEMS_ABBR[self.status]
        if self.problems:
            text += ": {0}/{1}".format(len(self.problems), self.strings)
        return text

    @property
    def has_problems(self):
        return self.status in c.FILE_PROBLEMS

    def __str__(self):
        return "{0} ({1})".format(self.path, c.FILE_STATUS_TEXT[self.status])


def scan_string(scanned_file, index, offset, data, keep_text):
    """ Validate one string and store the result in scanned_file. """
    try:
        st = JStr.from_modified_utf8(data)
    except ModifiedUtf8Error as e:
        logging.debug("String %d of %s is invalid: %s",
                      index, scanned_file.path, e)
        scanned_file.problems.append(
            StringProblem(index, offset, e.valid_up_to, e.error_len))
    else:
        if keep_text:
            scanned_file.texts.append(str(st))


def scan_records(scanned_file, data, keep_text):
    """ Scan data as a sequence of u2 length prefixed strings.

    Returns False if data ends in the middle of a record.
    """
    buf = BytesIO(data)
    index = 0
    while buf.tell() < len(data):
        offset = buf.tell()
        try:
            entry = ConstantUtf8(buffer=buf)
        except MalformedConstantPoolEntry as e:
            if e.error is None:
                logging.debug("%s: %s", scanned_file.path, e)
                scanned_file.strings = index
                return False
            # the string bytes start after the u2 length
            scanned_file.problems.append(
                StringProblem(index, offset + 2, e.valid_up_to, e.error_len))
        else:
            if keep_text:
                scanned_file.texts.append(str(entry))
        index += 1
    scanned_file.strings = index
    return True


def scan_file(scanned_file, framing=c.FRAMING_RECORDS, keep_text=False):
    """ Scan a file and fill scanned_file with the results.

    Inputs:
     - scanned_file -- ScannedFile object to scan
     - framing -- c.FRAMING_RECORDS or c.FRAMING_RAW
     - keep_text -- Boolean, store the decoded strings in scanned_file.texts

    Returns scanned_file.
    """

    logging.debug("Scanning file: %s", scanned_file.path)
    scanned_file.problems = []
    scanned_file.texts = []
    try:
        with open(scanned_file.path, 'rb') as f:
            data = f.read()
    except (IOError, OSError) as e:
        scanned_file.status = c.FILE_UNREADABLE
        scanned_file.error_text = str(e)
        return scanned_file

    complete = True
    if framing == c.FRAMING_RAW:
        scanned_file.strings = 1
        scan_string(scanned_file, 0, 0, data, keep_text)
    else:
        complete = scan_records(scanned_file, data, keep_text)

    if not complete:
        scanned_file.status = c.FILE_TRUNCATED
    elif scanned_file.problems:
        scanned_file.status = c.FILE_INVALID_STRINGS
    else:
        scanned_file.status = c.FILE_OK
    return scanned_file


def multiprocess_scan_file(scanned_file):
    """ Does the multiprocess stuff for scan_file """
    # Protect everything so an exception will be returned from the worker
    try:
        framing = multiprocess_scan_file.framing
        keep_text = multiprocess_scan_file.keep_text
        return scan_file(scanned_file, framing, keep_text)
    except KeyboardInterrupt:
        raise
    except Exception:
        except_type, except_class, tb = sys.exc_info()
        tb_text = [tuple(frame) for frame in extract_tb(tb)]
        return (scanned_file, (except_type, str(except_class), tb_text))


def _mp_pool_init(d):
    """ Function to initialize the multiprocessing in console_scan.

    Inputs:
    - d -- Dictionary containing the information to copy to the function of the child process.

    """

    assert isinstance(d, dict)
    assert 'framing' in d
    assert 'keep_text' in d
    multiprocess_scan_file.framing = d['framing']
    multiprocess_scan_file.keep_text = d['keep_text']


def console_scan(scanned_files, processes=1, framing=c.FRAMING_RECORDS,
                 keep_text=False, verbose=False, title=" Scanning files "):
    """ Scan all the files printing status to console.

    Inputs:
     - scanned_files -- List of ScannedFile objects to scan.
     - processes -- An integer with the number of child processes to use
     - framing -- c.FRAMING_RECORDS or c.FRAMING_RAW
     - keep_text -- Boolean, store the decoded strings of each file
     - verbose -- Boolean, if true it will print a line per scanned file.

    Returns the list of scanned files. With more than one process they are
    copies of the ones given.
    """

    print("\n{0:-^60}".format(title))
    total = len(scanned_files)
    if not total:
        print("Info: No files to scan.")
        return []

    pool = None
    if processes > 1:
        pool = multiprocessing.Pool(processes=processes,
                                    initializer=_mp_pool_init,
                                    initargs=({'framing': framing,
                                               'keep_text': keep_text},))
        # Tests indicate that smaller amount of jobs per worker make all type
        # of scans faster
        jobs_per_worker = 5
        results = pool.imap(multiprocess_scan_file, scanned_files,
                            jobs_per_worker)
    else:
        results = (scan_file(f, framing, keep_text) for f in scanned_files)

    if not verbose:
        pbar = ProgressBar(widgets=[SimpleProgress(), Bar(), AdaptiveETA()],
                           max_value=total).start()
    scanned = []
    try:
        for counter, result in enumerate(results, 1):
            if isinstance(result, tuple):
                raise ChildProcessException(result[0], *result[1])
            logging.debug("New result: %s (%s)", result, result.oneliner_status)
            scanned.append(result)
            if not verbose:
                pbar.update(counter)
            else:
                status = "(" + result.oneliner_status + ")"
                print("Scanned {0: <30} {1:.<24} {2}/{3}".format(
                    result.filename, status, counter, total))
        if not verbose:
            pbar.finish()
    except (KeyboardInterrupt, ChildProcessException):
        # If not, dead processes will accumulate in windows
        if pool is not None:
            pool.terminate()
        raise

    if pool is not None:
        pool.close()
        pool.join()
    return scanned


def count_files(scanned_files, status):
    """ Return the number of files with the given status. """
    return sum(1 for f in scanned_files if f.status == status)


def status_table(scanned_files):
    """ Return a text table with a row per file status.

    Columns are the number of files with the status, the strings read from
    them and how many of those strings are invalid.
    """

    rows = [("Status", "Files", "Strings", "Invalid")]
    for status in [c.FILE_OK] + c.FILE_PROBLEMS:
        files = [f for f in scanned_files if f.status == status]
        rows.append((c.FILE_STATUS_TEXT[status],
                     count_files(scanned_files, status),
                     sum(f.strings for f in files),
                     sum(len(f.problems) for f in files)))

    widths = [max(len(str(row[i])) for row in rows) for i in range(4)]
    rule = "+" + "+".join("-" * (w + 2) for w in widths) + "+"
    lines = [rule]
    for n, row in enumerate(rows):
        # status names to the left, counts to the right
        cells = [" {0:<{1}} ".format(row[0], widths[0])]
        cells += [" {0:>{1}} ".format(v, w) for v, w in zip(row[1:], widths[1:])]
        lines.append("|" + "|".join(cells) + "|")
        if n == 0:
            lines.append(rule)
    lines.append(rule)
    return "\n".join(lines)


def summary(scanned_files):
    """ Return a text with the results of a scan.

    It has the status table and a line per problem found.
    """

    text = "\n{0:=^60}\n".format(" Scan results ")
    text += status_table(scanned_files) + "\n"

    for f in scanned_files:
        if not f.has_problems:
            continue
        text += "\n{0}: {1}\n".format(f.path, c.FILE_STATUS_TEXT[f.status])
        if f.error_text:
            text += "    {0}\n".format(f.error_text)
        for p in f.problems:
            text += "    {0}\n".format(p.description)
    return text
