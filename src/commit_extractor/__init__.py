"""git 커밋 히스토리 추출 및 필터링 도구

변경 파일 확장자, 커밋 메시지 길이, 변경 내용 길이 조건으로
커밋을 선별하여 표 형식 레코드로 출력합니다.
"""

__version__ = "0.1.0"
