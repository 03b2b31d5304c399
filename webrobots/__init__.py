# encoding=utf-8
'''Robots exclusion checks for web crawlers.'''
from webrobots.robots import WebRobots
from webrobots.version import __version__
