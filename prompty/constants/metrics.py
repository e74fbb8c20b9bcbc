class Constants:
    class Metric:
        HUNDRED_SAMPLING_RATE = 1
        INCREMENT_COUNT = 1
        API_LATENCY = "request_latency"
        API_COUNT = "request_count"
        PROMPT_SUBMISSION = "prompt_submission"

    class Tag:
        PATH = "path"
        METHOD = "method"
        CODE = "code"
        OUTCOME = "outcome"
