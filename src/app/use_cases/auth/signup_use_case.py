from src.libs.result import Error, Result, Return
from src.app.repositories.user_repository import UserValidationError
from src.app.services.token_service import TokenService
from src.app.services.unit_of_work import UnitOfWork
from src.domain.entities import NewUser
from .dtos import AuthResult, SignupCommand, UserView


class SignupUseCase:
    """
    Signup Use Case

    Command/Response Pattern:
    - Input: SignupCommand (raw signup intent)
    - Output: Result[AuthResult] (user view plus session token)

    Business Logic:
    1. Require name, password and password confirmation (email optional)
    2. Create the user; the repository validates fields, checks that the
       password matches its confirmation, and stores only a bcrypt hash
    3. Commit, then issue a session token for the new user
    """

    def __init__(self, uow: UnitOfWork, token_service: TokenService):
        self.uow = uow
        self.token_service = token_service

    async def execute(self, command: SignupCommand) -> Result[AuthResult]:
        """
        Execute signup use case

        Args:
            command: SignupCommand with name, email, password, password_confirm

        Returns:
            Result[AuthResult] with user view and token
            or Error(VALIDATION_ERROR) if details are missing or invalid
        """
        if not command.name or not command.password or not command.password_confirm:
            return Return.err(Error("VALIDATION_ERROR", "Missing details"))

        async with self.uow:
            try:
                user = await self.uow.users.create(
                    NewUser(
                        name=command.name,
                        email=command.email,
                        password=command.password,
                        password_confirm=command.password_confirm,
                    )
                )
            except UserValidationError as e:
                return Return.err(Error("VALIDATION_ERROR", e.message))

            await self.uow.commit()

            token = self.token_service.sign(user.id)
            return Return.ok(AuthResult(user=UserView.model_validate(user), token=token))
