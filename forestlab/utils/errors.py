# forestlab/utils/errors.py
class UserInputError(RuntimeError):
    """
    Raised for invalid user-provided config (split ratios, columns, model ids).
    Should NOT print traceback.
    """


class PipelineAbort(RuntimeError):
    """
    Raised by a step when the run cannot continue with the data at hand
    (empty frame, empty split).
    """
