"""Worked answers to the tour exercises: trees, small exercises, crawler, handlers."""