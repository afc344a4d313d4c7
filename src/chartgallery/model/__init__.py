"""
The MODEL layer contains pure data structures and geometry.
It has NO knowledge of the GUI (Qt) or the Visualization (PyVista).
Every function here is stateless: inputs in, new arrays out.
"""
