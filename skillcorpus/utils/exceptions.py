class SkillCorpusError(Exception):
    """Base exception for the skill corpus tooling."""


class SkillNotFoundError(SkillCorpusError):
    def __init__(self, skill_name: str):
        self.skill_name = skill_name
        super().__init__(f"Skill not found: {skill_name}")


class FrontmatterError(SkillCorpusError):
    def __init__(self, detail: str, line: int | None = None):
        self.detail = detail
        self.line = line
        super().__init__(f"Invalid front-matter: {detail}")


class SkillParseError(SkillCorpusError):
    def __init__(self, path: str, detail: str):
        self.path = path
        super().__init__(f"Failed to parse {path}: {detail}")


class ValidationRunError(SkillCorpusError):
    def __init__(self, runtime: str, detail: str):
        self.runtime = runtime
        super().__init__(f"Validation run failed ({runtime}): {detail}")
