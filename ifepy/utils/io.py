# -*- coding:utf8 -*-
import logging

LOG_FORMAT = '%(levelname)s:%(name)s: %(message)s'


def add_verbose_arg(parser):
    parser.add_argument('-v', default="WARNING", const='INFO', nargs='?',
                        choices=['DEBUG', 'INFO', 'WARNING'], dest='verbose',
                        help='Produces verbose output depending on '
                             'the provided level. \nDefault level is warning, '
                             'default when using -v is info.')


def configure_logging(level):
    """
    Send log records to stderr at the given level name.
    """
    logging.basicConfig(format=LOG_FORMAT)
    logging.getLogger().setLevel(level)
