"""
Configuration constants for the media linker.
"""
import re

# --- File Type Definitions ---
VIDEO_EXTS = {'.avi', '.mp4', '.m4v', '.mkv', '.rmvb'}

# --- Destination Categories ---
# Each kind renders into exactly one of these destination roots
MOVIES = 'movies'
SHOWS = 'shows'
CATEGORIES = (MOVIES, SHOWS)

# --- Scanning ---
# A child is dropped (with its subtree) when its name mentions one of these
# words more often than its parent's name does
JUNK_WORDS = [re.compile(r'sample', re.IGNORECASE), re.compile(r'extra', re.IGNORECASE)]

# --- Name Cleaning ---
# Scene/encoding markers that start the tail of a release name
RELEASE_TAG_PATTERN = re.compile(r'(hdtv|xvid|divx|dvd|tvrip|[xh].?264|\d{3,4}[pi]).*$', re.IGNORECASE)
# A run of capitals followed by more text is usually a release group or source tag
SHOUTING_TAIL_PATTERN = re.compile(r'[A-Z]{3}.+$')
# "The Complete Series ..." style suffixes on season-pack folders
SERIES_SUFFIX_PATTERN = re.compile(r'(the[._ -])?(complete[._ -])?series.*', re.IGNORECASE)

# --- Culling ---
# OS housekeeping entries. Spared, but never keep an otherwise-empty folder alive.
OS_ARTIFACTS = {'.DS_Store', '.AppleDouble', '.AppleDesktop', 'Network Trash Folder', 'Temporary Items'}
# Bracket-tagged folders (e.g. "[keep]") are user sentinels and never touched
SENTINEL_PATTERN = re.compile(r'^\[.*\]$')

# --- Logging ---
LOG_FORMAT = "%(asctime)s [%(levelname)s] %(message)s"
