"""
This package contains the run pipeline of the Batch Transcoder.

A pipeline turns the parsed command line into a job, picks the encoder driver,
runs it under the event loop with cancellation wired to process signals, and
reports the outcome as an exit code.
"""
