"""A C major scale, up and back down.

Prints the composition in notation form, then plays it.
"""

import logging

import rondo
import rondo.constants.instruments as instruments

logging.basicConfig(level=logging.INFO)

scale = rondo.notes("C D E F G A B C' B A G F E D C", instruments.PIANO)

print(scale)

rondo.play(scale)
