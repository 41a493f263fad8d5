"""
The MODEL layer contains pure data structures and the layout algorithm.
It has NO knowledge of the GUI (Qt).
It deals with unit records, tree layout and input files.
"""
