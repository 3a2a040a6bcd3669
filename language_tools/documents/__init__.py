"""Document-analysis job orchestration.

Module split:
    - `models`: request/result contracts and job states.
    - `options`: closed PII category and redaction policy types.
    - `request_builder`: document batch -> `JobRequest`.
    - `submitter`: job submission and operation-handle capture.
    - `poller`: status polling with deadline and cancellation.
    - `reconciler`: terminal payload -> one normalized outcome.
    - `client`: composition of the above.
    - `errors`: fault taxonomy.
"""
