from linkresolver.dao.bloom.existence_filter_dao import ExistenceFilterRedisDAO

__all__ = ['ExistenceFilterRedisDAO']
