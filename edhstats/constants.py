"""Constants and mappings for the Commander stats engine."""

# Elimination categories, in display order
ELIMINATION_TYPES = [
    'Combat Damage',
    'Commander Damage',
    'Non-Combat Damage',
    'Other',
]

# Sentinel some rows carry instead of an elimination cause
WINNER_SENTINEL = 'Winner'

# Short keys used by the percentage breakdowns
ELIMINATION_SHORT_KEYS = {
    'Combat Damage': 'C',
    'Commander Damage': 'D',
    'Non-Combat Damage': 'N',
    'Other': 'O',
}

# Counting windows (years are added dynamically as 'YYYY')
WINDOW_TOTAL = 'total'
WINDOW_RECENT = 'recent'

# Marker for an average over an empty sample list
NO_DATA = '-'

# Colour identity letters and their canonical priority
COLOR_ORDER = {'W': 0, 'U': 1, 'B': 2, 'R': 3, 'G': 4}
COLORLESS = 'C'

COLOR_NAMES = {
    'W': 'Mono White',
    'U': 'Mono Blue',
    'B': 'Mono Black',
    'R': 'Mono Red',
    'G': 'Mono Green',
    'WU': 'Azorius',
    'WB': 'Orzhov',
    'WR': 'Boros',
    'WG': 'Selesnya',
    'UB': 'Dimir',
    'UR': 'Izzet',
    'UG': 'Simic',
    'BR': 'Rakdos',
    'BG': 'Golgari',
    'RG': 'Gruul',
    'WUB': 'Esper',
    'WUR': 'Jeskai',
    'WUG': 'Bant',
    'WBR': 'Mardu',
    'WBG': 'Abzan',
    'WRG': 'Naya',
    'UBR': 'Grixis',
    'UBG': 'Sultai',
    'URG': 'Temur',
    'BRG': 'Jund',
    'WUBR': 'Not Green',
    'WUBG': 'Not Red',
    'WURG': 'Not Black',
    'WBRG': 'Not Blue',
    'UBRG': 'Not White',
    'WUBRG': '5 Color',
    'C': 'Colorless',
}

# Win rate bands used by the dashboard (lower bound -> tier)
WINRATE_TIERS = [
    (30.0, 'elite'),
    (25.0, 'strong'),
    (15.0, 'average'),
]
