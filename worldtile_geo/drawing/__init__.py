"""Land-plot drawing session logic (render-free).

- editor: create, scale, rotate, and validate the plot being drawn
"""
