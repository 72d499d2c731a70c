"""
Core building blocks shared by the whole application: configuration,
logging, persistence, credentials and the rules that decide whether a
message may be written.
"""
