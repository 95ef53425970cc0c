"""동적 검색 조건 패키지 - 절 표현식, 팩토리, 조합기, SQL 어댑터.

Dynamic filter package.

Modules:
    expressions: 절 트리와 널 안전 AND 결합 (Clause tree and null-safe AND)
    predicates: 선택 조건 → 절 팩토리 (Optional criterion to clause factory)
    composer: 누적기/조건 목록 조합 전략 (Builder and where-params strategies)
    sql: SQLAlchemy 변환 어댑터 (SQLAlchemy translation adapter)
"""
