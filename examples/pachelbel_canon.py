"""Pachelbel's Canon in D.

The cello plays the ground bass alone for one pass, then three violins
enter one after another, each four measures behind the last.  Both the
bass and the canon loop forever; press Ctrl+C to stop.
"""

import logging

import rondo
import rondo.constants.instruments as instruments

logging.basicConfig(level=logging.INFO)

bass = rondo.notes("D,2 A,,2 | B,,2 ^F,,2 | G,,2 D,,2 | G,,2 A,,2", instruments.CELLO)

melody = rondo.notes(
	"^F'2 E'2 | D'2 ^C'2 | B2 A2 | B2 ^C'2 |"
	"D'2 ^C'2 | B2 A2 | G2 ^F2 | G2 E2 |"
	"D ^F A G | ^F D ^F E | D B, D A | G B A G |"
	"^F D E ^C' | D' ^F' A' A | B G A ^F | D D' D3/2 .1/2 |",
	instruments.VIOLIN
)

# Each voice enters after four 4-beat measures.
canon = rondo.canon(rondo.forever(melody), 4 * 4, rondo.IDENTITY, 3)

pachelbel = rondo.concat(bass, rondo.accompany(canon, bass))

rondo.play(pachelbel)
