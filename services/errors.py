class TidystreakError(Exception):
    status_code = 400
    code = 'ERROR'

    def to_dict(self):
        return {'error': self.code, 'message': str(self)}

class PolicyViolation(TidystreakError):
    status_code = 409
    code = 'WIP_LIMIT_REACHED'

class InvalidStatus(TidystreakError):
    code = 'INVALID_STATUS'

class CardNotFound(TidystreakError):
    status_code = 404
    code = 'CARD_NOT_FOUND'

class HabitNotFound(TidystreakError):
    status_code = 404
    code = 'HABIT_NOT_FOUND'

class InvalidHabitName(TidystreakError):
    code = 'INVALID_NAME'

class DuplicateHabitName(TidystreakError):
    status_code = 409
    code = 'DUPLICATE_NAME'

class HabitLimitReached(TidystreakError):
    status_code = 409
    code = 'HABIT_LIMIT_REACHED'

class InvalidReminderTime(TidystreakError):
    code = 'INVALID_REMINDER_TIME'

class TimerError(TidystreakError):
    code = 'TIMER_ERROR'

class InvalidTimerDuration(TimerError):
    code = 'INVALID_TIMER_DURATION'

class CardNotInProgress(TimerError):
    status_code = 409
    code = 'CARD_NOT_IN_PROGRESS'

class TimerAlreadySet(TimerError):
    status_code = 409
    code = 'TIMER_ALREADY_SET'

class PersistenceFailure(TidystreakError):
    status_code = 500
    code = 'PERSISTENCE_FAILURE'
