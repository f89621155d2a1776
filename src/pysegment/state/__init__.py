"""State layer.

Pure pieces of the segment cache: the immutable value models, the
state-transition function that folds events into a segment state, and the
change detector that tells subscribers whether their piece moved.
"""
