LAMBDA_NAME = 'create_link'

# Log event codes
CREATE_SUCCESS = 'CREATE_SUCCESS'
CREATE_REJECTED = 'CREATE_REJECTED'
